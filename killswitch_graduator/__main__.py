from killswitch_graduator.cli import main

if __name__ == "__main__":
    main()
