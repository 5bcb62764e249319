from r2c.pipeline import main

main()
