from pickem import create_app
from pickem.services import PoolService

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "service": PoolService.from_app(app),
        "store": app.extensions["pickem_store"],
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=app.config.get("DEBUG", False))
