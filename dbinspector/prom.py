from prometheus_client import CollectorRegistry

# Dedicated registry so repeated imports (tests, reloads) never clash with
# the process-wide default one.
REGISTRY = CollectorRegistry(auto_describe=True)
