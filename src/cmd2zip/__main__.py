from cmd2zip.cli.main_cli import main

main()
