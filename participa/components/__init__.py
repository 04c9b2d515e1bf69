"""Components that can be mounted into participatory spaces."""
