# wsgi.py
# SkillWise API served by gunicorn: `gunicorn wsgi:app`

import os

from app import create_app

app = create_app()

if __name__ == "__main__":
    # local dev server only
    app.run(host="127.0.0.1", port=int(os.getenv("PORT", "5000")), debug=os.getenv("FLASK_DEBUG") == "1")
