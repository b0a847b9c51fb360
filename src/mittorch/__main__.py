from mittorch.cli.main import main

main()
