"""Web interface: the served page, its REST API and Socket.IO events."""
