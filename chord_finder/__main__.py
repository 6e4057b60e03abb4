from chord_finder.cli import main

main()
