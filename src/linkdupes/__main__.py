from linkdupes.cli import main

main()
