"""sitestage - portfolio site renderer for headless CMS content."""
