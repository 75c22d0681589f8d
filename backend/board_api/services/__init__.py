"""Services Layer — orchestration between the API layer and core/infrastructure."""
