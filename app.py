# app.py

from dotenv import load_dotenv

load_dotenv()

from pharmatrust import create_app  # noqa: E402

# gunicorn entrypoint: `gunicorn app:app`
app = create_app()


# Local run only
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["PORT"])
