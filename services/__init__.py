"""Service layer: business operations behind the HTTP blueprints."""
