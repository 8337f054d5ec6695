"""NiceGUI user interface: layout, components, controllers and pages."""
