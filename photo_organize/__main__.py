from photo_organize.cli import main

if __name__ == '__main__':
    main()
