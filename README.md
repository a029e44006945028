# nutricion

A small library for keeping patient records and their health measurements
(weight, height, BMI, body fat and muscle mass) in a relational database.
It works with a local SQLite file or with a MariaDB/MySQL server, and
provides the pieces a front end needs: form validation, patient search and
the data behind weight and BMI progress charts. User-facing texts (labels,
table headers, validation messages) are in Spanish.

## Modules

- `nutricion.models` – the `User` and `HealthMetric` dataclasses. An `id`
  of -1 marks a record not yet stored. `HealthMetric.calculate_bmi()` sets
  and returns the BMI from weight (kg) and height (cm), or 0.0 when either
  is not positive.
- `nutricion.database` – `DatabaseManager` opens an SQLite file
  (`initialize_sqlite`, creating its directory if needed) or a MariaDB
  server (`initialize_mariadb`) and makes sure the `users` and
  `health_metrics` tables exist. `execute(sql, params)` runs a statement
  written with `:name` placeholders on either back end and returns the
  cursor; rows come back as dictionaries. Failures raise `DatabaseError`.
  The manager is a context manager and closes the connection on exit;
  `is_open()` and `close()` are also available. `DatabaseType` names the
  two back ends.
- `nutricion.users` – `UserManager(database)`: `add_user` (stores and
  returns the new id), `get_all_users` (ordered by first name),
  `get_user_by_id` (returns `None` when absent), `update_user` and
  `delete_user`. The last two raise `ValueError` for an id that is not
  positive and `LookupError` when no such patient exists. Deleting a
  patient on SQLite also deletes their measurements.
- `nutricion.metrics` – `HealthMetricManager(database)`:
  `add_health_metric`, `get_health_metrics_by_user_id` (ordered by date,
  then creation time), `get_health_metric` (returns `None` when absent),
  `update_health_metric` and `delete_health_metric`, with the same
  `ValueError` / `LookupError` rules as for patients.
- `nutricion.forms` – `MetricForm` and `UserForm` hold what a user typed
  and raise `ValidationError` from `validate()` when it cannot be saved.
  `MetricForm` clamps each value to its `SpinRange` (`WEIGHT_RANGE`,
  `HEIGHT_RANGE`, `BODY_FAT_RANGE`, `MUSCLE_MASS_RANGE`); `from_metric`
  pre-fills a form for editing, `apply_to` copies the values onto a metric
  and recomputes its BMI, and `to_metric` builds a new metric.
  `UserForm.to_user` builds a new patient with names trimmed. The choice
  lists are `GENDERS`, `ACTIVITY_LEVELS` and `GOALS`. `filter_users` does
  the case-insensitive search over names and ids, and `user_table_rows`
  produces the rows of the patient list.
- `nutricion.charts` – `patient_title`, `patient_labels` and
  `metric_table_rows` format a patient's detail view. `build_chart_data`
  turns measurement rows into a `ChartData` with sorted weight and BMI
  points and padded `AxisRange`s, falling back to default ranges when no
  row is usable. `chart_date_label` formats a date as the time axis shows
  it.

## Example

```python
from nutricion.database import DatabaseManager
from nutricion.forms import MetricForm, UserForm
from nutricion.metrics import HealthMetricManager
from nutricion.users import UserManager

with DatabaseManager() as database:
    database.initialize_sqlite("data/nutricion.db")
    users = UserManager(database)
    metrics = HealthMetricManager(database)

    patient = UserForm(first_name="Ana", last_name1="García").to_user()
    users.add_user(patient)

    measurement = MetricForm(weight=70.0, height=170.0).to_metric(patient.id)
    metrics.add_health_metric(measurement)

    for user in users.get_all_users():
        history = metrics.get_health_metrics_by_user_id(user.id)
        print(user.first_name, user.last_name1, len(history))
```

To use a MariaDB server instead, call `initialize_mariadb` with the host,
port, database name, user name and password:

```python
password = "password"
database.initialize_mariadb("localhost", 3306, "nutricion", "user", password)
```

## What the package does not do

It has no graphical interface and no command-line program: there are no
windows, dialogs or drawn charts. The `forms` and `charts` modules supply
the validated values, table rows, labels, points and axis ranges; drawing
them is left to whatever front end uses the library.

## Requirements

Python 3.10 or later. MariaDB/MySQL support uses PyMySQL; SQLite support
uses the standard library.