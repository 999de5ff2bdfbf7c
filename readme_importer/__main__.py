from readme_importer.cli import app

# python -m readme_importer import-readme
if __name__ == "__main__":
    app()
