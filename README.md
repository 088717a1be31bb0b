# costidw

`costidw` builds demand surfaces for communities spread over a landscape.

For every community with a positive requirement it runs an accumulated
cost-distance search over a friction raster. It then adds that community's
requirement, weighted by inverse cost, to a shared output grid. One GeoTIFF
is written for each processed year.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Inputs

The command runs two scenarios, *walking* first and *vehicle* second. Each
scenario takes three inputs.

**Friction raster** (GeoTIFF, first band)

- Gives the cost of entering each cell.
- Cells with friction `<= 0` cannot be entered.
- Its no-data value, truncated to an integer, is the run's null value. When
  no no-data value is set, the null value is 0.
- Cells with negative friction are set to the null value in the output, as
  soon as at least one community has contributed.

**Localities raster** (GeoTIFF, first band, same size as the friction raster)

- Each cell that differs from the null value holds a community identifier,
  truncated to an integer.
- When an identifier appears more than once, the last cell in row order is used.
- Its pixel width is the scale.
- Its geotransform and projection are copied to the output files.

**Demand table** (CSV)

- The first column holds community identifiers.
- Each following column holds one year's requirement per community.
- Requirements are divided by 1000, giving tonnes.
- Double quotes are removed from the header names and from the identifiers.
- When an identifier repeats, its first row is used.

## How the search works

Cost spreads from a community's cell to its eight neighbours:

- A lateral step costs the friction of the cell entered.
- A diagonal step costs √2 times that friction.
- With relative friction, the friction is also multiplied by the scale.

The time limit is given in hours and converted to seconds. The search stops
once it has expanded a cell whose cost is over that limit. Cells it never
reaches keep the largest float32 value as their cost.

Each community then adds this to every output cell that is not null:

```
requirement / cost ** exponent
```

Communities are searched concurrently on a thread pool.

## Command line

Installing the package provides the `costidw` command. Every option is
required.

| Option | Meaning |
| --- | --- |
| `-1`, `--frictionWalking` | friction raster, walking |
| `-2`, `--locsWalking` | localities raster, walking |
| `-3`, `--demmandWalking` | demand CSV, walking |
| `-4`, `--frictionVehicle` | friction raster, vehicle |
| `-5`, `--locsVehicle` | localities raster, vehicle |
| `-6`, `--demmandVehicle` | demand CSV, vehicle |
| `-r`, `--relative` | `1` for relative friction; any other value means absolute |
| `-p`, `--processors` | number of worker threads; `0` lets the pool choose |
| `-t`, `--timeLimit` | search limit in hours |
| `-e`, `--exponent` | IDW exponent |
| `-y`, `--skippingYears` | step between processed year columns; `-1` processes every year |
| `-s`, `--startingYear` | accepted, but does not restrict the run |
| `-f`, `--finalYear` | accepted, but does not restrict the run |

Numeric options are read from their leading number, and any trailing
characters are ignored. A command-line error prints the usage and exits with
status 0. `costidw --version` prints `1`.

Output files go to the current directory. Each is named
`IDW_<label><NN>.tif`:

- `<label>` is characters 5 to 8 of the year column's header.
- `<NN>` is the year's column index, padded to two digits.

Progress and timings are printed to standard output. List the options with:

```
costidw --help
```

## Library use

**`costidw.methods`**

- `Position` is a cell on the search frontier. Positions order by cost and
  then by insertion key.
- `reset_matrix(rows, cols, value)` returns a filled float32 grid.
- `cost_distance(friction, start, scale, time_limit, relative)` returns the
  accumulated cost surface from one start cell.
- `idw_update(requirement, cost_dist, idw, exponent, cell_null)` adds one
  weighted requirement to a grid in place. Cells with cost `<= 0` become
  `cell_null`.

**`costidw.geotiff`**

- `read_geotiff(path)` reads the first band as float32 into a `GeoRaster`.
  A `GeoRaster` has `data`, `geotransform`, `projection`, `nodata`, `rows`,
  `cols`, `scale` and `null_value`.
- Reading handles:
  - strip and tile layouts;
  - uncompressed and Deflate data;
  - the horizontal predictor for integer samples.
- `write_geotiff(path, data, geotransform, projection, nodata)` writes an
  uncompressed single-band float32 GeoTIFF.

**`costidw.raster`**

- `load_demand` reads the demand CSV as `(column name, values)` pairs.
- `read_localities` returns a mapping of identifiers to `Locality` cells,
  together with the count of non-null cells.
- `count_communities` counts the non-null cells.
- `format_raster` and `print_raster` show a grid as text.
- `count_lines` and `read_file` are small file helpers.

**`costidw.pipeline`**

- `ScenarioConfig` holds `relative`, `threads`, `hours` and `exponent`.
- `required_biomass` picks one year's requirements.
- `accumulate_idw` builds one year's surface.
- `output_name` names the output file.
- `run_scenario` processes a list of years and writes their files.

**`costidw.years`**

- `stepped_years` chooses year columns at a fixed step.
- `specific_year` checks a single year column.

**`costidw.options`**

- `build_parser` and `parse_options` parse a variant of the options that
  selects one year. In this variant, `-y`/`--year` is a column index and
  there is no `-s` or `-f`.
- They return an `Options` object. No command is installed for this variant.

**`costidw.cli`**

- `run(options)` runs both scenarios. It treats `options.year` as the year
  step.
- `main(argv)` is the entry point of the `costidw` command.

## What it does not do

- It does not reproject rasters, and it does not check that the two rasters
  of a scenario share a georeference. It only checks that their sizes match.
- It cannot read BigTIFF, or compression other than Deflate. It does not
  write compressed output.
- The starting and final year options do not limit which years are
  processed.