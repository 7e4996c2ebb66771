"""Core job engine logic: workflow registry, dispatcher, runner, coordinator."""
