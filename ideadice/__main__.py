from ideadice.main import main

main()
