"""Built-in rule packs. Every RulePack subclass in this package is discovered automatically."""
