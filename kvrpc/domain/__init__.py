"""Wire-level models shared by the dispatcher, the router and the client."""
