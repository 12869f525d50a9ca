"""
Application Layer

Contains application services that orchestrate domain objects and
infrastructure adapters.

Structure:
- services/: The playback sequencer and the library service
- interfaces/: Port interfaces for infrastructure adapters
"""
