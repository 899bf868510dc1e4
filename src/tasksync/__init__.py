"""Task list synchronized between local storage and a REST backend."""
