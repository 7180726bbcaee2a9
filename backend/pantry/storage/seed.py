"""
Standard catalog seed: measurement units with base conversions, common ingredients,
grocery categories with aisle sort order, and a default category profile.
Seeding only fills empty tables, so admin edits survive restarts.
"""

from pantry.logging import get_logger
from pantry.storage.models import Category, CategoryProfile, Ingredient, MeasurementUnit
from pantry.storage.repository import CatalogRepository

logger = get_logger(__name__)

# Base units: ml for volume, g for weight, piece for count.
# special/container units only convert within their own category.
STANDARD_MEASUREMENTS = [
    ("ml", "volume", 1, "milliliter"),
    ("l", "volume", 1000, "liter"),
    ("tsp", "volume", 4.92892, "teaspoon"),
    ("tbsp", "volume", 14.7868, "tablespoon"),
    ("fl oz", "volume", 29.5735, "fluid ounce"),
    ("cup", "volume", 236.588, "cup"),
    ("pint", "volume", 473.176, "pint"),
    ("quart", "volume", 946.353, "quart"),
    ("gallon", "volume", 3785.41, "gallon"),
    ("g", "weight", 1, "gram"),
    ("kg", "weight", 1000, "kilogram"),
    ("oz", "weight", 28.3495, "ounce"),
    ("lb", "weight", 453.592, "pound"),
    ("piece", "count", 1, "piece"),
    ("dozen", "count", 12, "dozen"),
    ("each", "count", 1, "each"),
    ("pinch", "special", 0.5, "pinch"),
    ("dash", "special", 0.625, "dash"),
    ("clove", "special", 1, "clove"),
    ("slice", "special", 1, "slice"),
    ("can", "container", 400, "can"),  # average 400 ml can
    ("jar", "container", 500, "jar"),  # average 500 ml jar
    ("package", "container", 1, "package"),
    ("large", "special", 1, "large"),
    ("medium", "special", 1, "medium"),
    ("small", "special", 1, "small"),
    ("whole", "special", 1, "whole"),
    ("q.b.", "special", 1, "to taste"),  # quanto basta
    ("to taste", "special", 1, "to taste"),
    ("handful", "special", 1, "handful"),
    ("bunch", "special", 1, "bunch"),
    ("sprig", "special", 1, "sprig"),
]

STANDARD_INGREDIENTS = [
    # Proteins
    ("chicken breast", "protein", ["chicken breasts", "boneless chicken breast"]),
    ("ground beef", "protein", ["ground meat", "minced beef"]),
    ("salmon", "protein", ["salmon fillet", "fresh salmon"]),
    ("eggs", "protein", ["egg", "large eggs"]),
    ("tofu", "protein", ["firm tofu", "extra firm tofu"]),
    ("bacon", "protein", ["sliced bacon", "thick cut bacon"]),
    # Oils
    ("olive oil", "oil", ["extra-virgin olive oil", "EVOO"]),
    ("vegetable oil", "oil", ["canola oil", "cooking oil"]),
    # Herbs and spices
    ("oregano", "herb", ["dried oregano", "fresh oregano"]),
    ("cumin", "spice", ["whole cumin seeds", "ground cumin", "cumin seeds"]),
    ("coriander", "spice", ["whole coriander seeds", "ground coriander", "coriander seeds"]),
    ("cloves", "spice", ["ground cloves", "whole cloves"]),
    ("basil", "herb", ["fresh basil", "dried basil"]),
    ("thyme", "herb", ["fresh thyme", "dried thyme"]),
    ("parsley", "herb", ["fresh parsley", "chopped parsley"]),
    ("paprika", "spice", ["sweet paprika", "smoked paprika"]),
    # Sweeteners
    ("brown sugar", "sweetener", ["dark brown sugar", "light brown sugar"]),
    ("honey", "sweetener", ["raw honey", "pure honey"]),
    ("sugar", "sweetener", ["white sugar", "granulated sugar"]),
    ("maple syrup", "sweetener", ["pure maple syrup", "real maple syrup", "grade a maple syrup"]),
    # Condiments
    ("vinegar", "condiment", ["cider vinegar", "apple cider vinegar", "white vinegar"]),
    ("soy sauce", "condiment", ["low sodium soy sauce"]),
    ("fish sauce", "condiment", ["asian fish sauce"]),
    ("salsa", "condiment", ["charred salsa verde", "salsa verde"]),
    # Seasonings
    ("salt", "seasoning", ["kosher salt", "table salt", "sea salt"]),
    ("black pepper", "seasoning", ["pepper", "ground black pepper"]),
    # Fruits
    ("pineapple", "fruit", ["whole pineapple", "fresh pineapple"]),
    ("apple", "fruit", ["apples", "granny smith apple"]),
    ("banana", "fruit", ["bananas", "ripe banana"]),
    ("lemon", "fruit", ["lemons", "fresh lemon"]),
    ("lime", "fruit", ["limes", "fresh lime"]),
    ("orange", "fruit", ["oranges", "fresh orange"]),
    # Grains and starches
    ("rice", "grain", ["white rice", "brown rice", "jasmine rice"]),
    ("pasta", "grain", ["spaghetti", "penne", "macaroni"]),
    ("bread", "grain", ["white bread", "whole wheat bread"]),
    ("flour", "grain", ["all-purpose flour", "wheat flour"]),
    ("quinoa", "grain", ["quinoa grain", "cooked quinoa"]),
    ("tortillas", "grain", ["corn tortillas", "flour tortillas"]),
    # Dairy
    ("milk", "dairy", ["whole milk", "2% milk", "skim milk"]),
    ("butter", "dairy", ["unsalted butter", "salted butter"]),
    ("cheese", "dairy", ["cheddar cheese", "mozzarella cheese", "cotija cheese", "crumbled cotija cheese"]),
    ("yogurt", "dairy", ["plain yogurt", "greek yogurt"]),
    ("cream", "dairy", ["heavy cream", "whipping cream"]),
    # Vegetables
    ("onion", "vegetable", ["onions", "yellow onion", "white onion"]),
    ("garlic", "vegetable", ["garlic cloves", "fresh garlic", "medium garlic", "minced garlic"]),
    ("tomato", "vegetable", ["tomatoes", "fresh tomatoes"]),
    ("bell pepper", "vegetable", ["bell peppers", "red bell pepper", "green bell pepper"]),
    ("carrot", "vegetable", ["carrots", "baby carrots"]),
    ("celery", "vegetable", ["celery stalks", "celery ribs"]),
    ("potato", "vegetable", ["potatoes", "russet potatoes"]),
    ("broccoli", "vegetable", ["broccoli florets", "fresh broccoli"]),
    ("chiles", "vegetable", ["jalapeño", "serrano chiles", "ancho chiles", "chipotle peppers"]),
    ("cilantro", "herb", ["fresh cilantro", "cilantro leaves"]),
]

DEFAULT_CATEGORIES = [
    ("protein", 10),
    ("vegetable", 20),
    ("fruit", 30),
    ("dairy", 40),
    ("grain", 50),
    ("herb", 60),
    ("spice", 70),
    ("seasoning", 80),
    ("oil", 90),
    ("condiment", 100),
    ("sweetener", 110),
    ("other", 999),
]

DEFAULT_PROFILE = "My Store"


def seed_catalog(repository: CatalogRepository) -> dict[str, int]:
    """Populate empty catalog tables. Returns how many rows were inserted per table."""
    inserted = {"measurements": 0, "ingredients": 0, "categories": 0, "profiles": 0}
    if not repository.list_units():
        for name, category, factor, display_name in STANDARD_MEASUREMENTS:
            repository.add_unit(
                MeasurementUnit(
                    name=name,
                    category=category,
                    base_conversion=float(factor),
                    display_name=display_name,
                )
            )
            inserted["measurements"] += 1
    if not repository.list_ingredients():
        for name, category, aliases in STANDARD_INGREDIENTS:
            repository.add_ingredient(Ingredient(name=name, category=category, aliases=list(aliases)))
            inserted["ingredients"] += 1
    if not repository.list_categories():
        for name, sort_order in DEFAULT_CATEGORIES:
            repository.add_category(Category(name=name, sort_order=sort_order))
            inserted["categories"] += 1
    if not repository.list_profiles():
        repository.add_profile(CategoryProfile(name=DEFAULT_PROFILE))
        inserted["profiles"] += 1
    logger.info(
        "catalog.seeded measurements=%s ingredients=%s categories=%s profiles=%s",
        inserted["measurements"],
        inserted["ingredients"],
        inserted["categories"],
        inserted["profiles"],
    )
    return inserted
