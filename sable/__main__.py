from sable.cli import main

main()
