# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="sable",
    version="0.3.0",
    description="Sable: a small functional language with pattern-matching dispatch, lazy lists and a static checker",
    packages=find_namespace_packages(include=["sable", "sable.*"]),
    python_requires=">=3.9",
    install_requires=[
        "click>=8.0",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["sable=sable.cli:main"],
    },
    zip_safe=False,
)
