"""SipSnap: cocktail browsing with mood photos and saved favorites."""
