"""Pipeline orchestration for mapcov."""
