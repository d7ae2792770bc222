from ppick.cli import main

main()
