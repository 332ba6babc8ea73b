"""Geocore core: configuration, errors, results, entities and builders."""
