"""
Recipe Models

Contains the Recipe model and its owned rows: sections, ingredient
lines, instruction steps and notes.
"""

from .base import db, utcnow


class Recipe(db.Model):
    """Recipe with metadata; owns sections, ingredients, instructions and notes."""
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(256), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False, default='')
    image_url = db.Column(db.Text, nullable=True)
    cuisine = db.Column(db.String(128), nullable=True)
    servings_amount = db.Column(db.Integer, nullable=False, default=2)
    time_prep = db.Column(db.String(64), nullable=False, default='')
    time_cook = db.Column(db.String(64), nullable=False, default='')
    time_total = db.Column(db.String(64), nullable=False, default='')
    source_type = db.Column(db.String(20), nullable=False, default='manual')  # manual | ai | import
    source_url = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    sections = db.relationship('RecipeSection', backref='recipe', lazy=True,
                               cascade='all, delete-orphan', passive_deletes=True)
    ingredients = db.relationship('RecipeIngredient', backref='recipe', lazy=True,
                                  cascade='all, delete-orphan', passive_deletes=True)
    instructions = db.relationship('Instruction', backref='recipe', lazy=True,
                                   cascade='all, delete-orphan', passive_deletes=True)
    notes = db.relationship('RecipeNote', backref='recipe', lazy=True,
                            cascade='all, delete-orphan', passive_deletes=True)

    def __repr__(self):
        return f"<Recipe {self.id}: {self.title}>"


class RecipeSection(db.Model):
    """Named group of ingredients/instructions (e.g. 'Dough', 'Sauce')."""
    __tablename__ = 'recipe_section'

    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)


class RecipeIngredient(db.Model):
    """
    One ingredient line.

    raw_text is the durable source of truth; the quantity/unit/item/notes
    columns are a best-effort decomposition of it. The quantity is the exact
    rational quantity_numerator / quantity_denominator, both NULL when the
    line has no amount.
    """
    __tablename__ = 'recipe_ingredient'

    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    section_id = db.Column(db.Integer, db.ForeignKey('recipe_section.id', ondelete='SET NULL'), nullable=True)
    raw_text = db.Column(db.Text, nullable=False)
    quantity_numerator = db.Column(db.Integer, nullable=True)
    quantity_denominator = db.Column(db.Integer, nullable=True)
    unit = db.Column(db.String(64), nullable=True)
    item = db.Column(db.String(256), nullable=True)
    notes = db.Column(db.String(256), nullable=True)
    order_index = db.Column(db.Integer, nullable=False, default=0)


class Instruction(db.Model):
    """Numbered instruction step, 1-based within its section."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    section_id = db.Column(db.Integer, db.ForeignKey('recipe_section.id', ondelete='SET NULL'), nullable=True)
    step_number = db.Column(db.Integer, nullable=False)
    text = db.Column(db.Text, nullable=False)
    notes = db.Column(db.String(256), nullable=True)


class RecipeNote(db.Model):
    """Free-text note attached to a recipe (note, storage, tip or variation)."""
    __tablename__ = 'recipe_note'

    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    kind = db.Column(db.String(64), nullable=False, default='note')
    text = db.Column(db.Text, nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)
