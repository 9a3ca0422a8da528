"""HTTP and WebSocket transport for Snake Frenzy sessions."""
