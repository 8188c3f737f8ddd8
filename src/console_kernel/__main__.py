from console_kernel.cli.main import main

main()
