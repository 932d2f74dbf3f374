from src.monitor.cli import main

main()
