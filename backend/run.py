from tastematch import create_app

app = create_app()


if __name__ == "__main__":
    app.logger.info("Registered routes:")
    for rule in app.url_map.iter_rules():
        app.logger.info("%s -> endpoint=%s methods=%s", rule, rule.endpoint, sorted(rule.methods))
    app.run(debug=app.config.get("DEBUG", False))
