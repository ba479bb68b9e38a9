from vulnmatch.worker import main

main()
