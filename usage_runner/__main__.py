from usage_runner.cli import main

main()
