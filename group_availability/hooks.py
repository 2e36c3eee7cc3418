app_name = "group_availability"
app_title = "Group Availability"
app_publisher = "Sebastian Ortiz Valencia"
app_description = "Disponibilidad semanal compartida y sugerencias de reunión para grupos"
app_email = "sebastianortiz989@gmail.com"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# Includes in <head>
# ------------------

# include js, css files in header of desk.html
# app_include_css = "/assets/group_availability/css/group_availability.css"
# app_include_js = "/assets/group_availability/js/group_availability.js"

# Installation
# ------------

# before_install = "group_availability.install.before_install"
# after_install = "group_availability.install.after_install"

# Testing
# -------

# before_tests = "group_availability.install.before_tests"

# Automatically update python controller files with type annotations for this app.
# export_python_type_annotations = True
