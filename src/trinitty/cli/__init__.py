"""Terminal front end: core runtime pieces, widgets and the application loop."""
