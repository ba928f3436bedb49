from stencil.cli import main

main()
