from micasa.cli import main

main()
