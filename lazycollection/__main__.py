from lazycollection.cli.main import APP_NAME, lazycollection

if __name__ == "__main__":
    lazycollection.main(prog_name=APP_NAME)
