"""micasa: home inventory tracker. This distribution carries its configuration engine and CLI."""
