from pagezen.main import main

main()
