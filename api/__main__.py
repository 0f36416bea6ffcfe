"""
Run Chirpy with Flask's dev server: python -m api

Listens on :8080. APP_ENV picks the config class, PLATFORM=dev enables
/admin/reset.
"""
import os
from . import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8080"))
    debug = app.config.get("DEBUG", False)
    app.run(host=os.getenv("HOST", "0.0.0.0"), port=port, debug=debug)
