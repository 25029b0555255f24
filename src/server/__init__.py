"""HTTP and WebSocket surface for the dispatch simulation."""
