from board_api.server import main

main()
