# Unit Tests
