"""Release side: stamp, fetch and publish the package family."""
