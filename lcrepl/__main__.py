from lcrepl.main import main

main()
