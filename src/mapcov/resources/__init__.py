"""Resource files and configuration templates."""


def get_default_config() -> str:
    """Return default configuration YAML content."""
    return """# mapcov configuration file

# Input files (can be overridden by CLI arguments)
# Give single-end reads, paired-end reads, or both
forward: ~
reverse: ~
single: ~
reference: ~
output_dir: "."

# Runtime settings
runtime:
  log_level: "INFO"
  log_file: ~
  keep_tmp: false
  verbose: false

# Performance settings
performance:
  threads: 1

# Optional analyses
analysis:
  quality_cutoff: -1      # minimum MAPQ kept; negative disables filtering
  redundancy: false
  mean_coverage: false
  coverage_map: false
  gc_content: false

# External tool parameters
tools:
  bowtie2:
    map_options: ["-a"]
    force_rebuild: false
  samtools: {}
  picard:
    command: ["picard"]   # or ["java", "-jar", "/path/to/picard.jar"]
  bedtools: {}
"""
