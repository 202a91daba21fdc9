"""Registry of special forms for the Sable evaluator.

Maps form names to handler functions that implement non-standard evaluation
rules. The evaluator consults this table before ordinary function
application. Every handler takes `(tail, env, ctx, evaluate_fn, is_tail_call)`.
"""

from sable.evaluation.special_forms.define_form import (
    def_form,
    def_memo_form,
    defpure_form,
    defpure_memo_form,
)
from sable.evaluation.special_forms.do_form import do_form
from sable.evaluation.special_forms.if_form import if_form
from sable.evaluation.special_forms.lambda_form import lambda_form
from sable.evaluation.special_forms.let_forms import let_form, scoped_set_form
from sable.evaluation.special_forms.quote_forms import quote_form
from sable.evaluation.special_forms.set_form import set_form
from sable.evaluation.special_forms.type_forms import contract_form, deftype_form
from sable.evaluation.special_forms.use_form import use_form

SPECIAL_FORMS = {
    "def": def_form,
    "def'": def_memo_form,
    "defpure": defpure_form,
    "defpure'": defpure_memo_form,
    "lambda": lambda_form,
    "if": if_form,
    "do": do_form,
    "let": let_form,
    "set": set_form,
    "set'": scoped_set_form,
    "deftype": deftype_form,
    "contract": contract_form,
    "use": use_form,
    "quote": quote_form,
}
