"""python -m nat_router 진입점"""

from nat_router.cli.app import main

if __name__ == "__main__":
    main()
