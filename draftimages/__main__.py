from draftimages.cli import main

main()
