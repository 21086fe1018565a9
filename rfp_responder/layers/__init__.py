"""Pipeline layers, leaf-first: extraction, segmentation, retrieval, generation, review."""
