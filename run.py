import os

from awardpool import create_app, db
from awardpool.models import (
    Admin,
    Category,
    Lobby,
    Nominee,
    Participant,
    Prediction,
    SystemConfig,
)

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Admin": Admin,
        "Category": Category,
        "Nominee": Nominee,
        "Lobby": Lobby,
        "Participant": Participant,
        "Prediction": Prediction,
        "SystemConfig": SystemConfig,
    }


if __name__ == "__main__":
    app.run(
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 5000)),
        debug=app.config.get("DEBUG", False),
    )
