"""Snake arcade game: simulation engine, pygame client and best-score storage."""
