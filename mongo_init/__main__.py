from mongo_init.main import run

run()
