"""Runtime components: REST transport and lazy pagination."""
