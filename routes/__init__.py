"""HTTP routers mounted by app.create_app()."""
