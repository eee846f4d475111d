# Rich text core services
# Pure document model, CMS adapters and renderer; no I/O
