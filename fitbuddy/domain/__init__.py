"""Pure domain logic shared by the companion service and the dashboard."""
