"""SipSpot cafe discovery web client."""
